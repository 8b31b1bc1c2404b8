"""Filesystem side of stage preparation: copies, cleanup and locale pruning."""
