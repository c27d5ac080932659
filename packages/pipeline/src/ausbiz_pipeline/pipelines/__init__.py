"""
ausbiz_pipeline.pipelines — orchestrators.

    from ausbiz_pipeline.pipelines.reconcile import ReconciliationController

    controller = ReconciliationController.from_settings(dataset)
    outcome = await controller.refresh()
"""
