"""
This package contains the pipelines of the iPod encoder.

`coordinator` runs the two stages of a single job as concurrent processes and
reaps them; `batch_pipeline` builds the jobs of a run and executes them one after
another.
"""
