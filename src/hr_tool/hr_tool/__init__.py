"""HR Tool package.

Organized by feature modules (users, leaves, attendance, reports) with a thin
Flask JSON controller layer over service/repository layers. The leave and
attendance accounting rules live in ``leaves.evaluator`` and
``reports.aggregator`` and do not touch the database.
"""
