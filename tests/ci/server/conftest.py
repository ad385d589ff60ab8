"""
Pytest configuration for server tests.

Builds the FastAPI app over a virtual clock so no test depends on wall time.
"""

import pytest
from fastapi.testclient import TestClient

from conductor.config.settings import ConductorSettings
from conductor.content.store import StaticContentStore
from conductor.schemas.content import KPIRecord, PresentationData, ProblemRecord, SolutionRecord
from conductor.server.websocket import create_app


@pytest.fixture(scope='function')
def content():
	return StaticContentStore(PresentationData(
		problems=[
			ProblemRecord(id='p1', section='chaos', title='Lost keys', financial_impact=12000),
			ProblemRecord(id='p2', section='chaos', title='Vehicle damage', financial_impact=25000),
		],
		solutions=[SolutionRecord(id='s1', title='Key control training', category='training')],
		executive_kpis=[KPIRecord(id='k1', title='Turnover', value='-35%')],
	))


@pytest.fixture(scope='function')
def app(timers, content, feature_flags):
	return create_app(ConductorSettings(), timer_service=timers, content=content, feature_flags=feature_flags)


@pytest.fixture(scope='function')
def client(app):
	with TestClient(app) as client:
		yield client
