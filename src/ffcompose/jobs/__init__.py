"""YAML job files describing a single ffmpeg invocation."""

from ffcompose.jobs.loader import Job, load_job, load_job_from_dict
from ffcompose.jobs.models import JobModel

__all__ = [
    "Job",
    "JobModel",
    "load_job",
    "load_job_from_dict",
]
