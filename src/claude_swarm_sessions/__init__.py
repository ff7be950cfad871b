# ABOUTME: Session addressing and discovery for claude-swarm runs.
# ABOUTME: Locates session directories under swarm home and tails their logs.

__version__ = "0.1.0"
