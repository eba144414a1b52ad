import os

from tsp_annealing.sa import COOLING_METHODS, Scheduler
import matplotlib.pyplot as plt


def plot_temperature_strategies():
    T_max = 100
    step_max = 1000
    decays = {
        "ExponentialMultiplicativeCooling": 0.995,
        "LogarithmicMultiplicativeCooling": 1.0,
        "LinearMultiplicativeCooling": 0.1,
        "QuadraticMultiplicativeCooling": 0.001,
    }

    schedulers = {
        name: Scheduler(name, T_max=T_max, decay=decays[name])
        for name in COOLING_METHODS
    }

    steps = range(step_max)
    plt.figure(figsize=(10, 6))

    for name, scheduler in schedulers.items():
        values = [scheduler.step(step) for step in steps]
        plt.plot(steps, values, label=f"{name} (decay={decays[name]})")

    plt.xlabel("Iteration")
    plt.ylabel("Temperature")
    plt.yscale("log")
    plt.title(f"Cooling schedules (T0 = {T_max}, {step_max} iterations)")
    plt.legend()
    plt.grid(True)

    out_path = os.path.join(os.path.dirname(__file__), "temp_strategies.png")
    plt.savefig(out_path)
    print(f"Plot saved to {out_path}")


if __name__ == "__main__":
    plot_temperature_strategies()
