"""Tubely video service: records, thumbnails and the video ingest pipeline."""
