"""Infrastructure layer: parser, filesystem and configuration adapters."""
