from __future__ import annotations
from dataclasses import dataclass

from policy.base import Policy

@dataclass
class SimConfig:
    capacity: int = 128
    frame_size: int = 2
    policy: Policy = Policy.FIRST_FIT

    def validate(self) -> "SimConfig":
        if self.capacity <= 0:
            raise ValueError(f"capacity must be positive, got {self.capacity}")
        if self.frame_size <= 0:
            raise ValueError(f"frame_size must be positive, got {self.frame_size}")
        if self.frame_size > self.capacity:
            raise ValueError(f"frame_size {self.frame_size} exceeds capacity {self.capacity}")
        if not isinstance(self.policy, Policy):
            self.policy = Policy.parse(str(self.policy))
        return self
