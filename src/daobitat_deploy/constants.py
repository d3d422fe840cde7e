"""Configuration constants for daobitat-deploy."""

# Hex prefix marker carried by Starknet felts
HEX_PREFIX = "0x"

# Platform fee passed to the RentalContract constructor (2.5%)
DEFAULT_FEE_BASIS_POINTS = "250"

DEFAULT_NETWORK = "testnet"

# Seconds between transaction status polls, and overall finality deadline
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_FINALITY_TIMEOUT = 300.0

# Scarb build outputs for the RentalContract package
CONTRACT_NAME = "daobitat_RentalContract"
SIERRA_SUFFIX = ".contract_class.json"
CASM_SUFFIX = ".compiled_contract_class.json"

DEPLOYMENT_RECORD_FILENAME = "deployment-info.json"

# Network configuration keyed by the STARKNET_NETWORK label
NETWORK_CONFIG = {
    "mainnet": {
        "chain_id": "SN_MAIN",
        "default_rpc_url": "https://starknet-mainnet.public.blastapi.io/rpc/v0_7",
    },
    "testnet": {
        "chain_id": "SN_SEPOLIA",
        "default_rpc_url": "https://starknet-sepolia.public.blastapi.io/rpc/v0_7",
    },
}

# Starknet JSON-RPC transaction status values
FINALITY_REJECTED = "REJECTED"
FINALITY_ACCEPTED_ON_L2 = "ACCEPTED_ON_L2"
FINALITY_ACCEPTED_ON_L1 = "ACCEPTED_ON_L1"
EXECUTION_SUCCEEDED = "SUCCEEDED"
EXECUTION_REVERTED = "REVERTED"

# JSON-RPC error code for a hash the node has not seen yet
TXN_HASH_NOT_FOUND = 29
