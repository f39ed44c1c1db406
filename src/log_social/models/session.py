"""
Session models: login options.
"""

from pydantic import BaseModel


class LoginConfig(BaseModel):
    url: str     # log endpoint
    agent: str   # destination / filter the log is partitioned by
