"""Background workers: ARQ settings and the content extraction task."""
