"""Tests for the service catalog."""

import pytest

from workshop_desk.database.models import JobService, Service
from workshop_desk.exceptions import NotFoundError, ValidationError


@pytest.fixture
def wash(repo):
    return repo.create_service(Service(
        name="Car Wash", type="fixed", price=15.0, estimated_time=20,
    ))


class TestServiceCatalog:
    def test_create_and_fetch(self, repo, wash):
        found = repo.get_service_by_id(wash.id)
        assert found.name == "Car Wash"
        assert found.estimated_time == 20
        assert found.is_active == 1

    def test_hourly_without_estimate(self, repo):
        svc = repo.create_service(Service(name="Diagnostics", type="hourly", price=120))
        assert repo.get_service_by_id(svc.id).estimated_time is None

    def test_negative_price_rejected(self, repo):
        with pytest.raises(ValidationError):
            repo.create_service(Service(name="Free?", price=-1))

    def test_unknown_type_rejected(self, repo):
        with pytest.raises(ValidationError):
            repo.create_service(Service(name="Odd", type="weekly", price=1))

    def test_update(self, repo, wash):
        wash.price = 18.0
        repo.update_service(wash)
        assert repo.get_service_by_id(wash.id).price == 18.0

    def test_update_missing(self, repo):
        with pytest.raises(NotFoundError):
            repo.update_service(Service(id="missing", name="X", price=1))

    def test_toggle_twice_restores(self, repo, wash):
        assert repo.toggle_service_active(wash.id).is_active == 0
        assert repo.get_active_services() == []
        assert repo.toggle_service_active(wash.id).is_active == 1
        assert [s.name for s in repo.get_active_services()] == ["Car Wash"]

    def test_toggle_missing(self, repo):
        with pytest.raises(NotFoundError):
            repo.toggle_service_active("missing")

    def test_price_change_does_not_rewrite_history(self, repo, wash, job_factory):
        job = repo.create_job(job_factory(services=[
            JobService(service_id=wash.id, service_name=wash.name,
                       price=wash.price, quantity=1),
        ]))
        wash.name = "Premium Wash"
        wash.price = 30.0
        repo.update_service(wash)

        stored = repo.get_job_by_id(job.id)
        assert stored.services[0].service_name == "Car Wash"
        assert stored.services[0].price == 15.0
        assert stored.total_price == 15.0
