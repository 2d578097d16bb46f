"""
Configuration Package for the iPod encoder.

This package centralizes all the static configuration settings for the application.
By separating configuration from the application logic, it becomes easier to manage
and modify parameters without changing the core code.

This package includes settings for:
- Common application settings like logging formats, temporary file naming and job states.
- User-overridable paths for the external tools (mplayer and ffmpeg).
- The fixed argument sets of the decode, encode and multiplex invocations.
"""
