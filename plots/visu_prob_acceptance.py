import os

import numpy as np
import matplotlib.pyplot as plt

from tsp_annealing.sa import p_accept

# Values of cost_improvement (current - candidate) between -1 and 1
cost_improvement = np.linspace(-1, 1, 500)

# Temperatures to test
temperatures = [100, 1, 0.1, 0.01]

# Create the plot
plt.figure(figsize=(8, 6))

for temp in temperatures:
    # Unclipped: improving moves give p > 1 and are always accepted
    acceptance_prob = np.minimum([p_accept(g, temp) for g in cost_improvement], 2.0)
    plt.plot(cost_improvement, acceptance_prob, label=f"Temperature = {temp}")

plt.axhline(1.0, color="black", linestyle="--", linewidth=0.8)

# Configure the plot
plt.title("Evolution of Acceptance Probability")
plt.xlabel("Cost Improvement (current - candidate)")
plt.ylabel("exp(gain / T), capped at 2 for display")
plt.legend()
plt.grid(True)

plt.savefig(
    os.path.join(os.path.dirname(__file__), "acceptance_probability.png"), dpi=300
)
plt.close()
