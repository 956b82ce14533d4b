"""
HTML pages served by the backend.

The NFT page embeds a small ethers v5 script: connect MetaMask, switch to
the configured chain, ask POST /mint for the price (checkOnly), check the
balance and finally call mintOwnNFT on the contract with that value.
Everything user-controlled is escaped before it reaches the markup.
"""
import html
import json

from config import Settings
from contracts.abi import NFT_CONTRACT_ABI


def render_index_page() -> str:
    return """<!DOCTYPE html>
<html>
<head><title>NFT Minting API</title></head>
<body>
    <h1>NFT Minting API</h1>
    <p>Available endpoints:</p>
    <ul>
        <li>GET /login - Start Discord OAuth2 flow</li>
        <li>GET /auth/callback - Discord OAuth2 callback</li>
        <li>POST /mint - Resolve the mint price or prepare the NFT metadata</li>
        <li>GET /nft-images/&lt;userId&gt;.png - Generated NFT images</li>
        <li>GET /health - Ledger connectivity</li>
    </ul>
</body>
</html>
"""


_NFT_PAGE_STYLE = """
        body {
            font-family: Arial, sans-serif;
            display: flex;
            flex-direction: column;
            align-items: center;
            padding: 20px;
            background-color: #2c2f33;
            color: white;
        }
        .nft-container { margin: 20px 0; }
        .mint-button {
            background-color: #7289da;
            color: white;
            border: none;
            padding: 10px 20px;
            border-radius: 5px;
            cursor: pointer;
            font-size: 16px;
            margin: 10px;
        }
        .mint-button:hover { background-color: #5b6eae; }
        .mint-button:disabled { background-color: #4a5264; cursor: not-allowed; }
        .wallet-container {
            display: flex;
            flex-direction: column;
            align-items: center;
            gap: 10px;
            margin: 20px 0;
        }
        .wallet-address { font-family: monospace; color: #7289da; }
"""

_NFT_PAGE_SCRIPT = """
        const PAGE = JSON.parse(document.getElementById('page-config').textContent);
        let userAddress = null;
        let mintPrice = null;

        async function checkAndSwitchNetwork() {
            try {
                await window.ethereum.request({
                    method: 'wallet_switchEthereumChain',
                    params: [{ chainId: PAGE.chainIdHex }],
                });
            } catch (switchError) {
                if (switchError.code !== 4902) {
                    throw new Error('Could not switch to ' + PAGE.chainName);
                }
                await window.ethereum.request({
                    method: 'wallet_addEthereumChain',
                    params: [{
                        chainId: PAGE.chainIdHex,
                        chainName: PAGE.chainName,
                        nativeCurrency: { name: 'ETH', symbol: 'ETH', decimals: 18 },
                        rpcUrls: [PAGE.rpcUrl],
                        blockExplorerUrls: [PAGE.explorerUrl],
                    }],
                });
            }
        }

        async function connectWallet() {
            if (typeof window.ethereum === 'undefined') {
                alert('Please install MetaMask to mint NFTs!');
                return false;
            }
            try {
                await window.ethereum.request({ method: 'eth_requestAccounts' });
                await checkAndSwitchNetwork();
                const provider = new ethers.providers.Web3Provider(window.ethereum);
                userAddress = await provider.getSigner().getAddress();

                document.getElementById('connectButton').textContent = 'Disconnect Wallet';
                document.getElementById('mintButton').style.display = 'block';
                document.getElementById('walletAddress').textContent =
                    'Connected: ' + userAddress.slice(0, 6) + '...' + userAddress.slice(-4);

                await checkBalanceAndPrice();
                return true;
            } catch (error) {
                console.error('Error:', error);
                alert('Failed to connect wallet: ' + error.message);
                return false;
            }
        }

        function disconnectWallet() {
            userAddress = null;
            document.getElementById('connectButton').textContent = 'Connect Wallet';
            document.getElementById('mintButton').style.display = 'none';
            document.getElementById('walletAddress').textContent = '';
        }

        async function toggleWallet() {
            if (userAddress) {
                disconnectWallet();
            } else {
                await connectWallet();
            }
        }

        async function checkBalanceAndPrice() {
            const response = await fetch('/mint', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify({
                    discordUsername: PAGE.username,
                    imageUrl: PAGE.imageUrl,
                    walletAddress: userAddress,
                    checkOnly: true,
                }),
            });
            const data = await response.json();
            if (!data.success) {
                return false;
            }
            mintPrice = data.price;
            const provider = new ethers.providers.Web3Provider(window.ethereum);
            const balance = ethers.utils.formatEther(await provider.getBalance(userAddress));
            const mintButton = document.getElementById('mintButton');
            if (parseFloat(balance) < parseFloat(mintPrice)) {
                alert('Insufficient ETH. You need at least ' + mintPrice +
                      ' ETH to mint. Your balance: ' + balance + ' ETH');
                mintButton.disabled = true;
                return false;
            }
            mintButton.disabled = false;
            return true;
        }

        async function mintNFT() {
            try {
                const provider = new ethers.providers.Web3Provider(window.ethereum);
                const contract = new ethers.Contract(PAGE.contractAddress, PAGE.abi, provider.getSigner());
                if (!confirm('Do you want to mint this NFT for ' + mintPrice + ' ETH?')) return;

                const tx = await contract.mintOwnNFT({ value: ethers.utils.parseEther(mintPrice) });
                alert('Please wait while your transaction is being processed...');
                await tx.wait();

                alert('NFT minted successfully!');
                document.getElementById('mintButton').style.display = 'none';
            } catch (error) {
                console.error('Error:', error);
                alert('Error minting NFT: ' + error.message);
            }
        }
"""


def render_nft_page(username: str, user_id: str, settings: Settings, contract_address: str) -> str:
    """Page shown after a successful Discord login."""
    image_url = f"/nft-images/{user_id}.png"
    page_config = {
        "username": username,
        "imageUrl": image_url,
        "contractAddress": contract_address,
        "abi": NFT_CONTRACT_ABI,
        "chainIdHex": settings.chain_id_hex,
        "chainName": settings.chain_name,
        "rpcUrl": settings.chain_public_rpc_url,
        "explorerUrl": settings.block_explorer_url,
    }
    # "</" must not appear inside a <script> block
    config_json = json.dumps(page_config).replace("</", "<\\/")

    return f"""<!DOCTYPE html>
<html>
<head>
    <title>Your Discord NFT</title>
    <script src="https://cdn.ethers.io/lib/ethers-5.7.2.umd.min.js"></script>
    <style>{_NFT_PAGE_STYLE}</style>
</head>
<body>
    <h1>Welcome, {html.escape(username)}!</h1>
    <div class="nft-container">
        <img src="{html.escape(image_url)}" alt="Your NFT" style="max-width: 1000px;"/>
    </div>
    <div class="wallet-container">
        <button class="mint-button" id="connectButton" onclick="toggleWallet()">Connect Wallet</button>
        <div id="walletAddress" class="wallet-address"></div>
    </div>
    <button class="mint-button" id="mintButton" onclick="mintNFT()" style="display: none;">Mint NFT</button>
    <script type="application/json" id="page-config">{config_json}</script>
    <script>{_NFT_PAGE_SCRIPT}</script>
</body>
</html>
"""
