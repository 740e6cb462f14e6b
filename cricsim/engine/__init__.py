"""
Match simulation engine: ball model, innings state machine, match
orchestrator, stats aggregator and the season runner built on them.
"""
