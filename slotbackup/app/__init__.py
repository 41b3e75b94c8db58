"""Command line front-end for slotbackup."""
