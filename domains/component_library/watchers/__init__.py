"""Filesystem watchers for the component library domain."""
