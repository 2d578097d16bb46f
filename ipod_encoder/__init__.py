"""
The iPod encoder package.

Converts source videos into iPod/iPhone compatible `.m4v` files by streaming
frames from mplayer into ffmpeg through a named pipe, then multiplexing the
encoded video with the source's audio.

The entry point is `main.py` at the project root (installed as `ipod-encode`).
The layers are:

    config/    static settings and the optional `config.user.yaml` overrides
    domain/    jobs, process status models, the temporary resource tracker, exceptions
    services/  conduit, stage supervision, commands, multiplexing, titles, a single job
    pipeline/  the two-stage coordinator and the sequential batch
    utils/     command running, tool lookup, parsing and formatting helpers
"""

__version__ = "1.0.0"
