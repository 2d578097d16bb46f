"""
Configuration settings related to the three tool invocations of a job.

This module defines the fixed argument sets for the decode stage (mplayer), the
encode stage (ffmpeg/libx264) and the multiplex step (ffmpeg). They are tuned for
playback on the iPod Touch and iPhone and are not meant to be changed per job;
only the video bitrate comes from the job options.
"""

# --- Decode Stage (mplayer) ---
# Frames are scaled to 480 pixels wide, keeping the aspect ratio with a height
# divisible by 16, and styled subtitles are burned in.
DECODER_NAME = "mplayer"
DECODER_OPTIONS = [
    "-noconfig", "all",
    "-vf-clr",
    "-nosound",
    "-benchmark",
    "-ass",
    "-ass-font-scale", "1.3",
    "-vf", "scale=480:-10",
]

# --- Encode Stage (ffmpeg, H.264 baseline) ---
ENCODER_NAME = "ffmpeg"
VIDEO_CODEC = "libx264"
X264_BASELINE_OPTIONS = {
    "flags": "+loop+mv4",
    "cmp": "256",
    "partitions": "+parti4x4+parti8x8+partp4x4+partp8x8+partb8x8",
    "me_method": "hex",
    "subq": "7",
    "threads": "auto",
    "trellis": "1",
    "refs": "5",
    "bf": "0",
    "coder": "0",
    "me_range": "16",
    "profile:v": "baseline",
    "g": "250",
    "keyint_min": "25",
    "sc_threshold": "40",
    "i_qfactor": "0.71",
    "qmin": "10",
    "qmax": "51",
    "qdiff": "4",
}

# --- Multiplex Step (ffmpeg) ---
AUDIO_CODEC = "aac"
AUDIO_BITRATE = "128k"
AUDIO_CHANNELS = "2"
MUX_FORMAT = "ipod"
