"""
Unit tests for the snapshot entry point.
"""
import pytest
from unittest.mock import AsyncMock, patch
from main import parse_args, render_snapshot


class TestParseArgs:
	"""Test cases for parse_args."""
	
	def test_defaults(self):
		"""Test the default theme and no selection."""
		args = parse_args([])
		assert args.theme == "light"
		assert args.select is None
		assert args.user_location is None
	
	def test_options(self):
		"""Test selection, theme and user location options."""
		args = parse_args(["--select", "emf-002", "--theme", "dark", "--user-location", "39.7", "-105.0"])
		assert args.select == "emf-002"
		assert args.theme == "dark"
		assert args.user_location == [39.7, -105.0]


class TestRenderSnapshot:
	"""Test cases for render_snapshot."""
	
	@pytest.mark.asyncio
	@patch('main.WildfireClient')
	async def test_writes_snapshot(self, mock_client_class, seed_fires, tmp_path):
		"""Test a snapshot with a selected fire is written."""
		client = mock_client_class.return_value
		client.get_wildfires = AsyncMock(return_value=seed_fires)
		client.get_active_alerts = AsyncMock(return_value=[])
		client.get_wildfire = AsyncMock(return_value=seed_fires[0])
		client.close = AsyncMock()
		output = tmp_path / "snapshot.html"
		
		result = await render_snapshot(parse_args(["--output", str(output), "--select", "crf-001"]))
		
		assert result == 0
		assert output.exists()
		client.close.assert_awaited_once()
	
	@pytest.mark.asyncio
	@patch('main.WildfireClient')
	async def test_backend_down(self, mock_client_class, tmp_path):
		"""Test a failed fetch writes nothing and reports failure."""
		from firemap.exceptions import ServiceError
		client = mock_client_class.return_value
		client.get_wildfires = AsyncMock(side_effect=ServiceError("backend down"))
		client.close = AsyncMock()
		output = tmp_path / "snapshot.html"
		
		result = await render_snapshot(parse_args(["--output", str(output)]))
		
		assert result == 1
		assert not output.exists()
