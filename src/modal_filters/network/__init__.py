from .graph import RoadGraph, RoadInfo, RoadNetwork, build_network, compass_bearing

__all__ = ["RoadGraph", "RoadInfo", "RoadNetwork", "build_network", "compass_bearing"]
