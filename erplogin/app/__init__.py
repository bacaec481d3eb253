"""Application composition: controller wiring and the command-line entrypoint."""
