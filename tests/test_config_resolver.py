"""
Unit Tests for Network Profile Resolution
"""

import pytest

from blockchain.network_profiles import (
    DEFAULT_GAS_LIMIT,
    DEFAULT_GAS_PRICE,
    MONAD_MAX_FEE_PER_GAS,
    NETWORK_PROFILES,
    PricingMode,
)
from deployer.config_resolver import (
    ConfigResolver,
    DeploymentCredentials,
    is_ethereum_family,
    load_environment,
)
from deployer.exceptions import (
    ConfigError,
    InvalidNumericConfig,
    MissingCredential,
    UnknownNetwork,
)


@pytest.fixture
def resolver():
    return ConfigResolver()


class TestCredentialValidation:

    @pytest.mark.parametrize('network', sorted(NETWORK_PROFILES))
    def test_mnemonic_required_for_every_network(self, resolver, network):
        with pytest.raises(MissingCredential) as exc_info:
            resolver.resolve({'PROJECT_ID': 'abc123'}, network)

        assert exc_info.value.variable == 'MNEMONIC'

    def test_blank_mnemonic_is_missing(self, resolver):
        with pytest.raises(MissingCredential):
            resolver.resolve({'MNEMONIC': '   ', 'PROJECT_ID': 'abc123'}, 'sepolia')

    @pytest.mark.parametrize('network', ['sepolia', 'mainnet'])
    def test_project_id_required_for_ethereum_networks(self, resolver, network):
        with pytest.raises(MissingCredential) as exc_info:
            resolver.resolve({'MNEMONIC': 'words'}, network)

        assert exc_info.value.variable == 'PROJECT_ID'

    @pytest.mark.parametrize('network', ['monad_testnet', 'development'])
    def test_project_id_not_required_elsewhere(self, resolver, network):
        profile = resolver.resolve({'MNEMONIC': 'words'}, network)

        assert profile.name == network

    def test_is_ethereum_family(self):
        assert is_ethereum_family('sepolia')
        assert is_ethereum_family('mainnet')
        assert not is_ethereum_family('monad_testnet')
        assert not is_ethereum_family('development')
        assert not is_ethereum_family('no-such-network')


class TestNetworkSelection:

    @pytest.mark.parametrize('network', ['goerli', 'Sepolia', 'sepolia ', '', 'monad'])
    def test_unknown_network(self, resolver, base_env, network):
        with pytest.raises(UnknownNetwork) as exc_info:
            resolver.resolve(base_env, network)

        assert exc_info.value.network == network
        assert isinstance(exc_info.value, ConfigError)

    def test_unknown_network_lists_configured_profiles(self, resolver, base_env):
        with pytest.raises(UnknownNetwork, match='monad_testnet'):
            resolver.resolve(base_env, 'ropsten')


class TestNumericOverrides:

    def test_gas_limit_override(self, resolver, base_env):
        profile = resolver.resolve(dict(base_env, GAS_LIMIT='6000000'), 'sepolia')

        assert profile.gas.limit == 6000000

    def test_gas_defaults(self, resolver, base_env):
        profile = resolver.resolve(base_env, 'sepolia')

        assert profile.gas.limit == DEFAULT_GAS_LIMIT == 4500000
        assert profile.gas.legacy_gas_price == DEFAULT_GAS_PRICE == 10000000000

    def test_blank_override_uses_default(self, resolver, base_env):
        profile = resolver.resolve(dict(base_env, GAS_PRICE=''), 'sepolia')

        assert profile.gas.legacy_gas_price == DEFAULT_GAS_PRICE

    def test_monad_overrides(self, resolver, base_env):
        env = dict(
            base_env,
            MONAD_GAS_LIMIT='25000000',
            MONAD_MAX_PRIORITY_FEE_PER_GAS='2000000000',
            GAS_LIMIT='1',
        )
        profile = resolver.resolve(env, 'monad_testnet')

        assert profile.gas.pricing_mode is PricingMode.EIP1559
        assert profile.gas.limit == 25000000
        assert profile.gas.max_fee_per_gas == MONAD_MAX_FEE_PER_GAS
        assert profile.gas.max_priority_fee_per_gas == 2000000000
        assert profile.gas.legacy_gas_price is None

    def test_monad_ignores_generic_gas_price(self, resolver, base_env):
        profile = resolver.resolve(dict(base_env, GAS_PRICE='123'), 'monad_testnet')

        assert profile.gas.legacy_gas_price is None

    @pytest.mark.parametrize('value', ['abc', '4.5e6', '0', '-1', '0x10'])
    def test_invalid_numeric_value(self, resolver, base_env, value):
        with pytest.raises(InvalidNumericConfig) as exc_info:
            resolver.resolve(dict(base_env, GAS_LIMIT=value), 'sepolia')

        assert exc_info.value.variable == 'GAS_LIMIT'

    def test_priority_fee_above_max_fee(self, resolver, base_env):
        env = dict(base_env, MONAD_MAX_FEE_PER_GAS='100', MONAD_MAX_PRIORITY_FEE_PER_GAS='200')

        with pytest.raises(InvalidNumericConfig):
            resolver.resolve(env, 'monad_testnet')

    def test_registry_profile_unchanged(self, resolver, base_env):
        resolver.resolve(dict(base_env, GAS_LIMIT='6000000'), 'sepolia')

        assert NETWORK_PROFILES['sepolia'].gas.limit == DEFAULT_GAS_LIMIT


class TestEnvironmentLoading:

    def test_env_file_overlaid_by_process_environment(self, tmp_path, monkeypatch):
        env_file = tmp_path / '.env'
        env_file.write_text('MNEMONIC=from file\nGAS_LIMIT=5000000\n')
        monkeypatch.delenv('MNEMONIC', raising=False)
        monkeypatch.setenv('GAS_LIMIT', '7000000')

        env = load_environment(str(env_file))

        assert env['MNEMONIC'] == 'from file'
        assert env['GAS_LIMIT'] == '7000000'

    def test_missing_env_file_is_skipped(self, tmp_path, monkeypatch):
        monkeypatch.setenv('PROJECT_ID', 'xyz')

        env = load_environment(str(tmp_path / 'absent.env'))

        assert env['PROJECT_ID'] == 'xyz'

    def test_credentials_from_env(self, base_env):
        credentials = DeploymentCredentials.from_env(base_env)

        assert credentials.project_id == 'abc123'
        assert 'test' not in repr(credentials)

    def test_credentials_require_mnemonic(self):
        with pytest.raises(MissingCredential):
            DeploymentCredentials.from_env({'PROJECT_ID': 'abc123'})
