"""Filesystem and submission services."""
