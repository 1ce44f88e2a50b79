"""Configuration models for the GeisPoint client."""
