"""
statetree CLI - inspect, verify and replay recorded event logs

Commands:
- statetree log tail/inspect/verify - Event log operations
- statetree replay - Replay event log through a reducer
- statetree snapshot create/verify - State snapshots
"""
