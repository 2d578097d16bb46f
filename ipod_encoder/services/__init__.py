"""
Services Package for the iPod encoder.

This package contains the "service layer" of the application. A service performs
one specific task of a job and is composed by the `JobRunner` and the pipelines.

- **StreamConduit (`stream_conduit`):** creates the named pipe between the stages.
- **StageSupervisor (`stage_supervisor`):** launches, waits on and terminates a stage.
- **TranscodeProfile (`transcode_profile`):** builds the mplayer and ffmpeg commands.
- **MultiplexStep (`multiplexer`):** combines source audio and encoded video.
- **Title strategies (`title_service`):** per-file titles from episode numbers.
- **JobRunner (`job_runner`):** runs one job from conduit to destination.
- **Logging Service (`logging_service`):** YAML success log and text error log.
"""
