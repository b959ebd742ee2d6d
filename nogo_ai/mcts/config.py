"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the MCTS algorithm:
the iteration budget, the UCB1 exploration constant and the random seed.
"""
from dataclasses import dataclass, fields
from typing import Optional, ClassVar

from nogo_ai.core.constants import DEFAULT_MCTS_ITERATIONS, DEFAULT_MCTS_EXPLORATION


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    This class defines all tunable parameters for the MCTS algorithm,
    with validation and sensible defaults.
    """
    # Search parameters
    iterations: int = DEFAULT_MCTS_ITERATIONS
    """Number of MCTS iterations to perform per move decision"""

    exploration_weight: float = DEFAULT_MCTS_EXPLORATION
    """UCB1 exploration parameter (default is sqrt(2))"""

    # Randomness
    seed: Optional[int] = None
    """Seed for the agent's random source (None = seeded from system entropy)"""

    # Constants
    INFINITE_VALUE: ClassVar[float] = float('inf')
    """Score given to children that have never been visited"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.iterations < 0:
            raise ValueError("iterations must be non-negative")

        if self.exploration_weight <= 0:
            raise ValueError("exploration_weight must be positive")

        if self.seed is not None and self.seed < 0:
            raise ValueError("seed must be non-negative or None")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (fewer iterations).

        Returns:
            Fast MCTSConfig object
        """
        return cls(iterations=50)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(
            iterations=2000,
            exploration_weight=1.2  # Slightly less exploration
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        # Filter out any keys that aren't valid parameters
        names = {f.name for f in fields(cls)}
        valid_params = {k: v for k, v in config_dict.items() if k in names}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
        }

    def __str__(self) -> str:
        params = [f"{name}={value}" for name, value in self.to_dict().items()]
        return f"MCTSConfig({', '.join(params)})"
