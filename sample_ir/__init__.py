"""Sample IR modules used by the demo and the CLI examples."""
