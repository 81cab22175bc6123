from __future__ import annotations

from dataclasses import replace

from relpanel.core.result import Err, Ok
from relpanel.panel.domain.model import ReleaseRecord
from relpanel.panel.flow.state import AuthState, PanelState
from relpanel.panel.flow.validate import (
    can_create_github,
    can_publish_catalog,
    policy_error,
    target_tag,
    validate_create,
)

from .._builders import ready_state


def test_ready_state_enables_both_actions() -> None:
    state = ready_state()
    assert target_tag(state) == "v1.0.1-feature-beta"
    assert can_create_github(state)
    assert can_publish_catalog(state)


def test_released_tag_disables_github_action() -> None:
    state = ready_state(
        releases=(ReleaseRecord(tag="v1.0.0"), ReleaseRecord(tag="v1.0.1-feature-beta")),
    )
    assert not can_create_github(state)
    assert can_publish_catalog(state)


def test_published_version_disables_catalog_action() -> None:
    state = ready_state().with_form(version="1.0.0")
    assert can_create_github(state)
    assert not can_publish_catalog(state)


def test_auth_gates_actions() -> None:
    state = replace(ready_state(), auth=AuthState(github=False, catalog=False))
    assert not can_create_github(state)
    assert not can_publish_catalog(state)


def test_unloaded_versions_disable_catalog_action() -> None:
    state = ready_state(entries=None)
    assert state.form.version == ""
    state = state.with_form(version="1.0.0")
    assert not can_publish_catalog(state)
    assert can_create_github(state)


class TestValidateCreate:
    def _error_kind(
        self,
        state: PanelState,
        *,
        publish_to_catalog: bool = True,
        release_github: bool = True,
    ) -> str:
        result = validate_create(
            state,
            publish_to_catalog=publish_to_catalog,
            release_github=release_github,
        )
        assert isinstance(result, Err)
        return result.error.kind

    def test_missing_fields_first(self) -> None:
        state = ready_state().with_form(version="not-a-version", postfix="")
        assert self._error_kind(state) == "missing_fields"

    def test_invalid_version(self) -> None:
        state = ready_state().with_form(version="1.0.0.0")
        assert self._error_kind(state) == "invalid_version"

    def test_protected_branch(self) -> None:
        state = ready_state().with_form(main_branch_locked=True)
        assert self._error_kind(state) == "protected_branch"

    def test_no_target(self) -> None:
        state = ready_state()
        kind = self._error_kind(state, publish_to_catalog=False, release_github=False)
        assert kind == "no_target"

    def test_catalog_needs_loaded_versions(self) -> None:
        state = ready_state(entries=None).with_form(version="1.0.0")
        assert self._error_kind(state) == "missing_fields"

    def test_first_release_required(self) -> None:
        state = ready_state(entries=()).with_form(version="1.0.0")
        assert self._error_kind(state) == "first_release_required"

    def test_version_conflict(self) -> None:
        state = ready_state().with_form(version="1.0.0")
        assert self._error_kind(state) == "version_conflict"

    def test_catalog_only_needs_upstream_release(self) -> None:
        state = ready_state()
        assert (
            self._error_kind(state, publish_to_catalog=True, release_github=False)
            == "missing_upstream_tag"
        )

    def test_catalog_only_with_upstream_release(self) -> None:
        state = ready_state(
            releases=(ReleaseRecord(tag="v1.0.1-feature-beta"),),
        )
        result = validate_create(state, publish_to_catalog=True, release_github=False)
        assert isinstance(result, Ok)
        assert result.value.catalog_id == "cat-private"

    def test_github_target_needs_github_auth(self) -> None:
        state = replace(ready_state(), auth=AuthState(github=False, catalog=True))
        kind = self._error_kind(state, publish_to_catalog=False, release_github=True)
        assert kind == "not_authenticated"

    def test_catalog_target_needs_catalog_auth(self) -> None:
        state = replace(
            ready_state(releases=(ReleaseRecord(tag="v1.0.1-feature-beta"),)),
            auth=AuthState(github=True, catalog=False),
        )
        kind = self._error_kind(state, publish_to_catalog=True, release_github=False)
        assert kind == "not_authenticated"

    def test_github_target_rejects_existing_tag(self) -> None:
        state = ready_state(
            releases=(ReleaseRecord(tag="v1.0.0"), ReleaseRecord(tag="v1.0.1-feature-beta")),
        )
        result = validate_create(state, publish_to_catalog=False, release_github=True)
        assert isinstance(result, Err)
        assert result.error.kind == "tag_exists"
        assert result.error.is_policy
        assert "v1.0.1-feature-beta" in result.error.message

    def test_github_only_ignores_catalog(self) -> None:
        state = ready_state(entries=None).with_form(version="3.0.0")
        result = validate_create(state, publish_to_catalog=False, release_github=True)
        assert isinstance(result, Ok)
        assert result.value.version == "3.0.0"
        assert result.value.postfix == "feature-beta"


def test_policy_error_order() -> None:
    assert policy_error(ready_state()) is None
    empty = policy_error(ready_state(entries=()))
    assert empty is not None and empty.kind == "first_release_required"
    conflict = policy_error(ready_state().with_form(version="1.0.0"))
    assert conflict is not None and conflict.kind == "version_conflict"
