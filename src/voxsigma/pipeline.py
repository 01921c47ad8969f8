"""Chaining of VoxSigma methods through Unix pipes (CLI driver only).

Example::

    response = (
        Pipeline(driver)
        .input("call.wav")
        .part().max_speakers(2).done()
        .trans().model("eng-usa").done()
        .run()
    )
"""

import logging
from typing import Any, Self

from voxsigma.driver.base import Driver, remove_temp_files
from voxsigma.driver.request import Request
from voxsigma.driver.response import Response
from voxsigma.errors import DispatchError
from voxsigma.methods import Dtmf, Lid, Method, Part, Trans

logger = logging.getLogger(__name__)


class PipelineStage:
    """Configures one method of a pipeline.

    Setter calls are forwarded to the wrapped method; :meth:`done` appends
    the method to the pipeline and returns the pipeline.
    """

    def __init__(self, pipeline: "Pipeline", method: Method):
        self._pipeline = pipeline
        self._method = method

    def done(self) -> "Pipeline":
        return self._pipeline.add(self._method)

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._method, name)
        if not callable(attr):
            return attr

        def forward(*args: Any, **kwargs: Any) -> "PipelineStage":
            attr(*args, **kwargs)
            return self

        return forward


class Pipeline:
    """Ordered stages run as a single shell command."""

    def __init__(self, driver: Driver | None = None):
        self._driver = driver
        self._input_file: str | None = None
        self._stages: list[Method] = []

    def input(self, audio_file: str) -> Self:
        """Audio file read by the first stage."""
        self._input_file = audio_file
        return self

    def with_driver(self, driver: Driver) -> Self:
        self._driver = driver
        return self

    def add(self, method: Method) -> Self:
        self._stages.append(method)
        return self

    def dtmf(self) -> Self:
        return self.add(Dtmf())

    def part(self) -> PipelineStage:
        return PipelineStage(self, Part())

    def lid(self) -> PipelineStage:
        return PipelineStage(self, Lid())

    def trans(self) -> PipelineStage:
        return PipelineStage(self, Trans())

    @property
    def stages(self) -> list[Method]:
        return list(self._stages)

    def to_requests(self) -> list[Request]:
        """Build one request per stage; only the first one gets the input file."""
        requests = [stage.to_request() for stage in self._stages]
        if requests and self._input_file is not None:
            requests[0] = requests[0].with_audio_file(self._input_file)
        return requests

    def run(self, driver: Driver | None = None) -> Response:
        """Execute all stages.

        Raises:
            DispatchError: If there is no driver, the driver cannot pipe
                commands, or the pipeline has no stages
        """
        driver = self._resolve_driver(driver)
        if not self._stages:
            raise DispatchError("Pipeline requires at least one stage")

        logger.debug("Running pipeline: %s", " | ".join(s.method_name for s in self._stages))
        return driver.execute_pipeline(self.to_requests())

    def to_cli(self, driver: Driver | None = None) -> str:
        """Equivalent shell command."""
        driver = self._resolve_driver(driver)
        requests = self.to_requests()
        try:
            return driver.to_cli_pipeline(requests)
        finally:
            for request in requests:
                remove_temp_files(request.temp_files)

    def _resolve_driver(self, driver: Driver | None) -> Any:
        driver = driver or self._driver
        if driver is None:
            raise DispatchError("No driver provided. Use with_driver() or pass a driver to run().")
        if not driver.supports_pipeline():
            raise DispatchError("Pipelines are only supported by the CLI driver")
        return driver
