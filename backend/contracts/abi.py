"""
ABI fragments for the profile-picture NFT contract.

Only the members this backend reads, plus mintOwnNFT which the wallet page
calls from the browser.
"""

NFT_CONTRACT_ABI = [
    {
        "inputs": [],
        "name": "PUBLIC_MINTING_END",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "INITIAL_MINT_PRICE",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint8", "name": "", "type": "uint8"}],
        "name": "rolePrices",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "mintOwnNFT",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
]
