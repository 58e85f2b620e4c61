"""
Petri Ecosystem Simulation

A headless predator/prey ecosystem simulator. Bacteria with heritable traits
forage for food, flee predators, reproduce and mutate across generations.

Architecture: the simulation is the source of truth. Renderers and UI panels
are consumers that read state and write tunable parameters between ticks.
"""

__version__ = "0.1.0"
