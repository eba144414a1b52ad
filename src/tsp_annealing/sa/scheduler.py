import math

from ..errors import ConfigurationError

COOLING_METHODS = (
    "ExponentialMultiplicativeCooling",
    "LogarithmicMultiplicativeCooling",
    "LinearMultiplicativeCooling",
    "QuadraticMultiplicativeCooling",
)


class Scheduler:
    """
    Select a cooling schedule by name and evaluate it per iteration.

    Every schedule recomputes the temperature from the initial value and
    the iteration count, so the only state carried between steps is the
    iteration number held by the caller.
    """

    def __init__(self, scheduler_type: str, T_max: float, decay: float):
        self.scheduler_type = scheduler_type
        self.scheduler = None
        if scheduler_type == "ExponentialMultiplicativeCooling":
            self.scheduler = ExponentialMultiplicativeCooling(T_max, decay)
        elif scheduler_type == "LogarithmicMultiplicativeCooling":
            self.scheduler = LogarithmicMultiplicativeCooling(T_max, decay)
        elif scheduler_type == "LinearMultiplicativeCooling":
            self.scheduler = LinearMultiplicativeCooling(T_max, decay)
        elif scheduler_type == "QuadraticMultiplicativeCooling":
            self.scheduler = QuadraticMultiplicativeCooling(T_max, decay)
        else:
            raise ConfigurationError(f"Unsupported cooling method: {scheduler_type}")

    def step(self, step: int) -> float:
        return self.scheduler.step(step)


class _Cooling:
    def __init__(self, T_max: float, decay: float):
        if not T_max > 0:
            raise ConfigurationError(
                f"initial_temperature must be > 0, got {T_max}"
            )
        self.check_decay(decay)
        self.T_max = T_max
        self.decay = decay

    @staticmethod
    def check_decay(decay: float) -> None:
        # Divisive schedules stay positive as long as the denominator >= 1
        if not decay >= 0:
            raise ConfigurationError(
                f"temperature_decay must be >= 0 for this cooling method, got {decay}"
            )

    def step(self, step: int) -> float:
        if step < 0:
            raise ValueError(f"Iteration must be non-negative, got {step}")
        return self.temperature(step)

    def temperature(self, step: int) -> float:
        raise NotImplementedError


class ExponentialMultiplicativeCooling(_Cooling):
    """T_k = T_0 * decay^k"""

    @staticmethod
    def check_decay(decay: float) -> None:
        if not 0 < decay <= 1:
            raise ConfigurationError(
                "temperature_decay must be in (0, 1] for "
                f"ExponentialMultiplicativeCooling, got {decay}"
            )

    def temperature(self, step: int) -> float:
        return self.T_max * self.decay**step


class LogarithmicMultiplicativeCooling(_Cooling):
    """T_k = T_0 / (1 + decay * ln(1 + k))"""

    def temperature(self, step: int) -> float:
        return self.T_max / (1 + self.decay * math.log(1 + step))


class LinearMultiplicativeCooling(_Cooling):
    """T_k = T_0 / (1 + decay * k)"""

    def temperature(self, step: int) -> float:
        return self.T_max / (1 + self.decay * step)


class QuadraticMultiplicativeCooling(_Cooling):
    """T_k = T_0 / (1 + decay * k^2)"""

    def temperature(self, step: int) -> float:
        return self.T_max / (1 + self.decay * step**2)
