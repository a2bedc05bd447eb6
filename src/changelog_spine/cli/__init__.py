"""changelog-spine command-line interface."""
