"""Driver registry: holds drivers in priority order and resolves files to them."""

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from .drivers import BUILTIN_DRIVERS, LARAVEL, Driver
from .exceptions import DriverRegistrationError
from .logging_config import get_logger
from .project import ProjectContext

logger = get_logger(__name__)


class DriverRegistry:
    """Priority-ordered set of drivers.

    Drivers are kept sorted by descending priority. The sort is stable, so
    drivers of equal priority stay in registration order.
    """

    def __init__(self, drivers: Iterable[Driver] = ()):
        self._drivers: List[Driver] = []
        for driver in drivers:
            self.register(driver)

    def register(self, driver: Driver) -> None:
        """Add a driver.

        Raises:
            DriverRegistrationError: If ``driver`` is not a Driver or its name
                is already registered
        """
        if not isinstance(driver, Driver):
            raise DriverRegistrationError(driver, "not a Driver instance")
        if self.get(driver.name) is not None:
            raise DriverRegistrationError(driver, f"a driver named {driver.name!r} is already registered")

        self._drivers.append(driver)
        self._drivers.sort(key=lambda d: -d.priority)
        logger.debug(f"Registered {driver!r}")

    def resolve(self, path: Union[str, Path], project: Optional[ProjectContext] = None) -> Optional[Driver]:
        """The highest-priority driver that can handle ``path``, if any."""
        for driver in self._drivers:
            if driver.can_handle(path, project):
                return driver
        return None

    def get(self, name: str) -> Optional[Driver]:
        for driver in self._drivers:
            if driver.name == name:
                return driver
        return None

    @property
    def drivers(self) -> List[Driver]:
        return list(self._drivers)

    def __len__(self) -> int:
        return len(self._drivers)

    def __iter__(self) -> Iterator[Driver]:
        return iter(list(self._drivers))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None


def default_registry() -> DriverRegistry:
    """Every built-in driver except Laravel."""
    return DriverRegistry(BUILTIN_DRIVERS)


def laravel_registry() -> DriverRegistry:
    registry = default_registry()
    registry.register(LARAVEL)
    return registry
