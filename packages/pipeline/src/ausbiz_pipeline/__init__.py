"""
ausbiz_pipeline — data reconciliation for the ausbiz dashboard.

Architecture:
  sources/     — one adapter per upstream (World Bank, market index, simulation)
  transforms/  — observation cleaning, unit conversion, cardinality fitting
  pipelines/   — the reconciliation controller that runs the adapter chain
  utils/       — structlog configuration, exponential-backoff retry decorator

Quick start:
    import asyncio
    from ausbiz_shared.dataset import Dataset
    from ausbiz_pipeline.pipelines.reconcile import ReconciliationController

    controller = ReconciliationController.from_settings(Dataset.with_defaults())
    outcome = asyncio.run(controller.refresh())
    print(outcome.state, outcome.source_label)

CLI:
    ausbiz refresh --json
    ausbiz serve --port 8000
"""

__version__ = "0.1.0"
