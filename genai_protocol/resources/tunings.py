"""
Tuning jobs resource.

The Gemini Developer API models tuning jobs as tuned models (``tunedModels``)
and answers a create call with a long-running operation; Vertex AI has
first-class ``tuningJobs``.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from ..pagers import AsyncPager
from ..protocol.dialect import Dialect
from ..protocol.enums import JobState, PagedItem
from ..protocol.mapping import from_dialect
from ..protocol.message_types import (
    CreateTuningJobConfig,
    ListTuningJobsConfig,
    ListTuningJobsResponse,
    TuningDataset,
    TuningJob,
)
from ._base import BaseResource
from .models import coerce_config


class Tunings(BaseResource):
    @property
    def _collection(self) -> str:
        return "tuningJobs" if self._dialect is Dialect.VERTEX else "tunedModels"

    async def tune(
        self,
        *,
        base_model: str,
        training_dataset: TuningDataset | dict[str, Any],
        config: CreateTuningJobConfig | dict[str, Any] | None = None,
    ) -> TuningJob:
        request = self._prepare(
            "CreateTuningJobParameters",
            base_model=base_model,
            training_dataset=coerce_config(TuningDataset, training_dataset),
            config=coerce_config(CreateTuningJobConfig, config),
        )
        response = await self._api_client.request("POST", self._collection, request.body)

        metadata = response.json.get("metadata")
        if self._dialect is Dialect.MLDEV and isinstance(metadata, dict):
            # Operation wrapping the tuned model that is being created
            job = TuningJob(name=metadata.get("tunedModel"), state=JobState.JOB_STATE_QUEUED)
        else:
            job = TuningJob.model_validate(from_dialect("TuningJob", response.json, self._context))
        logger.info(f"[Tunings] Created tuning job {job.name}")
        return job

    async def get(self, *, name: str) -> TuningJob:
        request = self._prepare("GetTuningJobParameters", name=name)
        response = await self._api_client.request("GET", request.url["name"])
        return TuningJob.model_validate(from_dialect("TuningJob", response.json, self._context))

    async def _list(
        self, *, config: ListTuningJobsConfig | dict[str, Any] | None = None
    ) -> ListTuningJobsResponse:
        request = self._prepare(
            "ListTuningJobsParameters", config=coerce_config(ListTuningJobsConfig, config)
        )
        response = await self._api_client.request("GET", self._collection, query=request.query)
        return ListTuningJobsResponse.model_validate(
            from_dialect("ListTuningJobsResponse", response.json, self._context)
        )

    async def list(
        self, *, config: ListTuningJobsConfig | dict[str, Any] | None = None
    ) -> AsyncPager[TuningJob]:
        list_config = coerce_config(ListTuningJobsConfig, config)
        response = await self._list(config=list_config)
        return AsyncPager(PagedItem.TUNING_JOBS, self._list, response, list_config)
