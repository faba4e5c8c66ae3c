"""Coverage Bounded Context.

Responsible for RF propagation and signal analysis:
- Value Objects: PropagationModel, SignalEstimate, CoverageCell, ContourLine,
  CoverageGrid
- Services: path loss models, signal_strength, best_signal, coverage sampler
"""
