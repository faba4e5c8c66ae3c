"""Application Layer.

Infrastructure and application services that orchestrate domain logic.
This layer holds storage adapters and render-side bookkeeping.
"""
