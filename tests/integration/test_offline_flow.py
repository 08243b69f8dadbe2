# =============================================================================
# tests/integration/test_offline_flow.py
# Integration Tests: Local-First Accounts and Background Sync
# =============================================================================

import requests

from inventory_core.services import create_services


class TestOfflineFirstFlow:
    """End-to-end flows through create_services()"""

    def test_register_then_login_without_remote_calls(self, config, gateway, session, presenter):
        services = create_services(config, presenter, gateway=gateway, background=False)
        session.get.side_effect = requests.exceptions.ConnectionError("offline")

        registered = services.accounts.register_user("Ana", "a@x.com", "pw1")
        assert registered.success
        assert len(services.accounts.local_accounts()) == 1

        session.reset_mock()
        login = services.accounts.login_user("a@x.com", "pw1")

        assert login.to_dict() == {
            "success": True,
            "message": "Login successful",
            "user": {"name": "Ana", "email": "a@x.com"},
        }
        session.get.assert_not_called()
        services.local_store.close()

    def test_reset_survives_outage_and_syncs_after_reconnect(self, config, gateway, session, presenter, make_response):
        services = create_services(config, presenter, gateway=gateway, background=False)
        queue = services.sync_queue

        session.get.side_effect = requests.exceptions.ConnectionError("offline")
        services.accounts.register_user("Ana", "a@x.com", "pw1")
        services.accounts.reset_password("a@x.com", "pw2")
        assert queue.pending_count == 1

        queue.process_queue()
        assert queue.pending_entries()[0].attempts == 2

        session.get.side_effect = None
        session.get.return_value = make_response(200, "Password updated")
        report = queue.process_queue()

        assert report.delivered == 1
        assert queue.pending_count == 0
        params = session.get.call_args.kwargs["params"]
        assert params == {
            "action": "resetPassword",
            "email": "a@x.com",
            "newPassword": "pw2",
            "timestamp": params["timestamp"],
        }
        services.local_store.close()

    def test_unconfigured_client_keeps_working_locally(self, unconfigured_config, presenter, session, unconfigured_gateway):
        services = create_services(
            unconfigured_config, presenter, gateway=unconfigured_gateway, background=False
        )

        assert services.accounts.register_user("Ana", "a@x.com", "pw1").success
        assert services.accounts.login_user("a@x.com", "pw1").success
        assert services.inventory.get_items() is None
        assert services.inventory.add_item("Pencil", 10).error_code == "CONFIG_002"
        assert services.accounts.reset_password("a@x.com", "pw2").error_code == "CONFIG_002"

        session.get.assert_not_called()
        session.post.assert_not_called()
        services.local_store.close()
