"""
unmoved-mover - Keyboard-driven mouse pointer for sway/i3

Hold a chord to glide the cursor around and click, driven entirely through
the window manager's IPC socket.
"""

__version__ = "0.1.0"
