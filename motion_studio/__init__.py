"""Motion Studio: prompt-to-video and caption rendering on Remotion Lambda."""

__version__ = "0.1.0"
