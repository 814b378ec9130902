"""Pub/sub nodes for the QuestNav link."""

from questnav.nodes.sim_device import SimDeviceNode

__all__ = ["SimDeviceNode"]
