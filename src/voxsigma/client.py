"""Entry point binding method builders to a configured driver."""

from pathlib import Path

from voxsigma.auth import Credential
from voxsigma.config.loader import config_from_env, create_driver, load_config
from voxsigma.config.schema import CliConfig, RestConfig, VoxSigmaConfig
from voxsigma.driver.base import AsyncHandle, Driver
from voxsigma.driver.request import Request
from voxsigma.driver.response import Response
from voxsigma.driver.rest import RestDriver
from voxsigma.errors import DispatchError
from voxsigma.methods import Align, Dtmf, Hello, Kws, Lid, Part, Status, Trans, Xml2Kar
from voxsigma.pipeline import Pipeline


class VoxSigma:
    """Fluent access to the VoxSigma methods.

    Example::

        vox = VoxSigma.cli("/usr/local/vrxs")
        response = vox.trans().model("fre").file("audio.wav").run()
        print(response.xml)

        vox = VoxSigma.rest("https://rest.vocapia.com:8093", ApiKeyCredential("..."))
        handle = vox.trans().model("eng").file("audio.mp3").run_async()
        response = handle.wait(timeout=600)
    """

    def __init__(self, config: VoxSigmaConfig | None = None, driver: Driver | None = None):
        """
        Initialize the client.

        Args:
            config: Configuration used to build the driver (defaults to CLI settings)
            driver: Pre-built driver; takes precedence over ``config``

        Raises:
            ConfigurationError: If the configured driver cannot be built
        """
        self._config = config or VoxSigmaConfig()
        self._driver = driver if driver is not None else create_driver(self._config)

    @classmethod
    def cli(
        cls, root: str = "/usr/local/vrxs", tmp: str = "/tmp", bin: str | None = None
    ) -> "VoxSigma":
        return cls(VoxSigmaConfig(driver="cli", cli=CliConfig(root=root, bin=bin, tmp=tmp)))

    @classmethod
    def rest(cls, base_url: str, credential: Credential, verify: bool = True) -> "VoxSigma":
        config = VoxSigmaConfig(
            driver="rest", rest=RestConfig(base_url=base_url, verify_ssl=verify)
        )
        return cls(config, driver=RestDriver(base_url, credential, verify=verify))

    @classmethod
    def from_env(cls) -> "VoxSigma":
        return cls(config_from_env())

    @classmethod
    def from_file(cls, path: Path | None = None) -> "VoxSigma":
        return cls(load_config(path))

    @property
    def driver(self) -> Driver:
        return self._driver

    @property
    def config(self) -> VoxSigmaConfig:
        return self._config

    def supports_pipeline(self) -> bool:
        return self._driver.supports_pipeline()

    def trans(self) -> Trans:
        return Trans(self._driver)

    def part(self) -> Part:
        return Part(self._driver)

    def lid(self) -> Lid:
        return Lid(self._driver)

    def align(self) -> Align:
        return Align(self._driver)

    def dtmf(self) -> Dtmf:
        return Dtmf(self._driver)

    def kws(self) -> Kws:
        return Kws(self._driver)

    def hello(self) -> Hello:
        return Hello(self._driver)

    def status(self) -> Status:
        return Status(self._driver)

    def xml2kar(self) -> Xml2Kar:
        return Xml2Kar(self._driver)

    def pipeline(self) -> Pipeline:
        """Pipeline bound to this client's driver.

        Raises:
            DispatchError: If the driver cannot pipe commands
        """
        if not self._driver.supports_pipeline():
            raise DispatchError("Pipelines are only supported by the CLI driver")
        return Pipeline(self._driver)

    def execute(self, request: Request) -> Response:
        return self._driver.execute(request)

    def execute_async(self, request: Request) -> AsyncHandle:
        return self._driver.execute_async(request)
