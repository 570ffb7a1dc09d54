"""
Test suite for statetree.

Focus areas:
- Reducer purity and combine() reference stability
- Store dispatch, subscription and re-entrancy rules
- Replay determinism
- Hash chain and snapshot integrity
"""
