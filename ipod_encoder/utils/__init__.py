"""
Utilities Package for the iPod encoder.

Modules:
    - ffmpeg_utils.py: Runs external commands and renders them for logs.
    - format_utils.py: Bitrate parsing, collision-free filenames, and formatting
      of durations and sizes.
    - module_updater.py: Locates and verifies the mplayer and ffmpeg executables.
"""
