from models import PackageStatus
from services.status_service import (
    HAPPY_PATH, get_package_progress, get_status_label, is_on_happy_path, is_terminal,
)

def test_progress_is_monotonic_along_happy_path():
    progress = [get_package_progress(status) for status in HAPPY_PATH]
    assert progress == sorted(progress)
    assert len(set(progress)) == len(progress)
    assert progress[0] == 10
    assert progress[-1] == 100

def test_off_path_statuses_have_no_progress():
    for status in (PackageStatus.FAILED_DELIVERY, PackageStatus.RETURNED, PackageStatus.CANCELLED):
        assert get_package_progress(status) == 0
        assert is_terminal(status)
        assert not is_on_happy_path(status)

def test_labels_and_string_input():
    assert get_status_label("out_for_delivery") == "Out for Delivery"
    assert get_status_label(PackageStatus.PAYMENT_PENDING) == "Payment Pending"
    assert get_package_progress("picked_up") == 50

def test_only_delivered_is_terminal_on_happy_path():
    assert [s for s in HAPPY_PATH if is_terminal(s)] == [PackageStatus.DELIVERED]

def test_statuses_endpoint(client):
    response = client.get("/statuses")
    assert response.status_code == 200
    body = {item["status"]: item for item in response.json()}
    assert len(body) == len(PackageStatus)
    assert body["in_transit"] == {"status": "in_transit", "label": "In Transit", "progress": 70, "terminal": False}
    assert body["cancelled"]["terminal"] is True
