"""Tests for the layered property namespace."""

import pytest

from buildorch.exceptions import UndefinedVariable
from buildorch.variables import PropertyNamespace


class TestPropertyNamespace:
    """Test composition, lookup and flattening."""

    def test_later_layer_wins(self):
        namespace = PropertyNamespace.compose([
            {'version': '1.0', 'name': 'base'},
            {'version': '2.0'},
            {'version': '3.0', 'extra': 'x'},
        ])

        assert namespace.resolve('version') == '3.0'
        assert namespace.resolve('name') == 'base'
        assert namespace.resolve('extra') == 'x'

    def test_undefined_name_raises(self):
        namespace = PropertyNamespace.compose([{'a': '1'}])

        with pytest.raises(UndefinedVariable) as exc_info:
            namespace.resolve('missing')

        assert exc_info.value.name == 'missing'

    def test_resolve_all_honors_override_order(self):
        namespace = PropertyNamespace.compose([
            {'project_version': '1.0', 'config_version': '1'},
            {'config_version': '7'},
        ])

        assert namespace.resolve_all() == {'project_version': '1.0', 'config_version': '7'}

    def test_resolve_is_deterministic(self):
        namespace = PropertyNamespace.compose([{'a': '1'}, {'a': '2'}])
        assert [namespace.resolve('a') for _ in range(5)] == ['2'] * 5

    def test_source_layers_are_not_shared(self):
        """Mutating the input mapping after composition has no effect."""
        layer = {'a': '1'}
        namespace = PropertyNamespace.compose([layer])
        layer['a'] = 'changed'
        layer['b'] = 'new'

        assert namespace.resolve('a') == '1'
        assert 'b' not in namespace

    def test_layers_are_read_only(self):
        namespace = PropertyNamespace.compose([{'a': '1'}])
        with pytest.raises(TypeError):
            namespace.layers[0]['a'] = '2'

    def test_values_are_stringified(self):
        namespace = PropertyNamespace.compose([{'count': 3, 'enabled': True, 'ratio': 0.5, 'off': False}])

        assert namespace.resolve('count') == '3'
        assert namespace.resolve('enabled') == 'true'
        assert namespace.resolve('off') == 'false'
        assert namespace.resolve('ratio') == '0.5'

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            PropertyNamespace.compose([{'': 'x'}])

    def test_with_layer_returns_new_namespace(self):
        base = PropertyNamespace.compose([{'a': '1', 'b': '2'}])
        derived = base.with_layer({'a': 'override'})

        assert derived.resolve('a') == 'override'
        assert derived.resolve('b') == '2'
        assert base.resolve('a') == '1'
        assert len(derived.layers) == 2

    def test_restricted_exposes_only_listed_names(self):
        namespace = PropertyNamespace.compose([
            {'project_version': '1.0', 'config_version': '7', 'secret': 's'}
        ])
        restricted = namespace.restricted(['project_version', 'config_version'])

        assert restricted.resolve_all() == {'project_version': '1.0', 'config_version': '7'}
        assert 'secret' not in restricted

    def test_restricted_requires_bound_names(self):
        namespace = PropertyNamespace.compose([{'a': '1'}])
        with pytest.raises(UndefinedVariable):
            namespace.restricted(['a', 'b'])

    def test_restricted_non_strict_drops_unbound_names(self):
        namespace = PropertyNamespace.compose([{'a': '1'}])
        restricted = namespace.restricted(['a', 'b'], strict=False)
        assert restricted.resolve_all() == {'a': '1'}
        assert 'b' not in restricted

    def test_get_with_default(self):
        namespace = PropertyNamespace.compose([{'a': '1'}])
        assert namespace.get('a') == '1'
        assert namespace.get('b') is None
        assert namespace.get('b', 'fallback') == 'fallback'

    def test_names_and_len(self):
        namespace = PropertyNamespace.compose([{'b': '1', 'a': '2'}, {'a': '3'}])
        assert namespace.names() == ['a', 'b']
        assert len(namespace) == 2

    def test_empty_namespace(self):
        namespace = PropertyNamespace.compose([])
        assert namespace.resolve_all() == {}
        assert 'anything' not in namespace
