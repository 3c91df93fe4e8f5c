"""
Entanglement demo using QLAB.

Runs the library's example circuits, prints their entanglement metrics
and compares sampled counts against the exact distribution.
"""

import numpy as np


def demo_bell_states():
    """
    Identify each Bell-state example and show its CHSH value.
    """
    from qlab.compiler.examples import get_example
    from qlab.runtime.engine import CircuitSimulator
    from qlab.core.io_spec import SimulatorConfig

    print("=" * 60)
    print("Bell States with QLAB")
    print("=" * 60)

    names = [
        "Bell State (|Φ⁺>)",
        "Bell State (|Φ⁻>)",
        "Bell State (|Ψ⁺>)",
        "Bell State (|Ψ⁻>)",
    ]

    for name in names:
        sim = CircuitSimulator(get_example(name), SimulatorConfig(seed=42))
        result = sim.execute(shots=1000)
        bell = result.entanglement.bell

        print(f"\n{name}")
        print(f"  Circuit:     {sim.circuit}")
        print(f"  Concurrence: {bell.concurrence:.4f}")
        print(f"  CHSH:        {bell.chsh:.4f} (classical bound {bell.classical_bound:.0f})")
        print(f"  Identified:  {bell.bell_label}")
        print(f"  Counts:      {result.counts}")

    print("=" * 60)


def demo_multi_qubit():
    """
    Entropy and mutual information for three- and four-qubit examples.
    """
    from qlab.compiler.examples import get_example
    from qlab.core.statevector import simulate
    from qlab.observables.entanglement import analyze

    print("\n" + "=" * 60)
    print("Multi-qubit Entanglement")
    print("=" * 60)

    for name in ["GHZ State (3-Qubit)", "Teleportation Prep", "Graph State (Ring)"]:
        report = analyze(simulate(get_example(name)))
        entropies = "  ".join(f"q{q}={s:.3f}" for q, s in enumerate(report.entropies))

        print(f"\n{name}")
        print(f"  Entropies: {entropies}")

        if not report.mutual_information_available:
            print("  Mutual information: unavailable for more than 3 qubits")
            continue

        for (a, b), value in sorted(report.mutual_information.items()):
            print(f"  I(q{a}:q{b}) = {value:.3f}")

        graph = report.to_graph()
        print(f"  Clusters: {graph.connected_clusters()}")

    print("=" * 60)


def demo_sampling_convergence():
    """
    Show how sampled frequencies approach |amplitude|^2 as shots grow.
    """
    from qlab.compiler.examples import get_example
    from qlab.core.statevector import probabilities, simulate
    from qlab.observables.sampler import MeasurementSampler, empirical_frequencies

    print("\n" + "=" * 60)
    print("Sampling Convergence")
    print("=" * 60)

    state = simulate(get_example("T-Depth Test"))
    exact = probabilities(state)
    sampler = MeasurementSampler(seed=7)

    print(f"{'Shots':>8}  {'Max deviation':>14}")
    print("-" * 26)
    for _ in range(5):
        histogram = sampler.sample(state, 2000, accumulate=True)
        deviation = np.max(np.abs(empirical_frequencies(histogram) - exact))
        print(f"{sampler.total_shots:>8}  {deviation:>14.4f}")

    print("=" * 60)


if __name__ == "__main__":
    demo_bell_states()
    demo_multi_qubit()
    demo_sampling_convergence()
