"""Upstream release models, shaped after the GitHub REST payload."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ReleaseAsset(BaseModel):
    """One file attached to a GitHub release.

    ``url`` is the API asset URL; requesting it with
    ``Accept: application/octet-stream`` returns the file body.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    url: str


class Release(BaseModel):
    """The subset of ``GET /repos/{owner}/{repo}/releases/latest`` we use."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    tag_name: str
    assets: list[ReleaseAsset] = []
