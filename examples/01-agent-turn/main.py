"""
Agent Turn Example

This example walks through two-phase agent turns without a language model
or a live chain:
1. Route prompts with the local keyword matcher
2. Execute read tools directly
3. Preview a transfer in simulation mode (approval still required)
4. Print the decision log

Run: python -m examples.01-agent-turn.main
"""
import asyncio

from agentchain import AgentRuntime, AppSettings, configure_logging
from agentchain.errors import ApprovalRequiredError
from agentchain.integrations import NetworkInfo, TransactionReceipt


# =============================================================================
# Offline Chain
# =============================================================================


class DemoChain:
    """ChainReader with fixed answers."""

    async def get_balance(self, address: str) -> int:
        return 42 * 10**18

    async def get_gas_price(self) -> int:
        return 3 * 10**9

    async def get_network(self) -> NetworkInfo:
        return NetworkInfo(name="unknown", chain_id=8119)

    async def get_transaction_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        return None


# =============================================================================
# Main
# =============================================================================


async def main():
    configure_logging("WARNING")

    settings = AppSettings(llm_backend="none", agent_name="DeFy Agent")

    async with AgentRuntime.from_settings(settings, chain=DemoChain()) as runtime:
        session = runtime.session

        print("Agent Turns (local routing)")
        print("=" * 50)
        print()

        for prompt in [
            "which network am I connected to?",
            "what is the gas fee right now",
            "balance of 0x742d35Cc6634C0532925a3b844Bc454e4438f44e",
        ]:
            decision = await session.process_prompt(prompt)
            outcome = await session.execute(decision)

            print(f"User: {prompt}")
            print(f"Tool: {decision.tool}")
            print(f"Agent: {outcome.message}")
            print()

        prompt = "send 5 to 0x742d35Cc6634C0532925a3b844Bc454e4438f44e"
        decision = await session.process_prompt(prompt)

        try:
            await session.execute(decision, simulate=True)
        except ApprovalRequiredError as e:
            print(f"User: {prompt}")
            print(f"Agent: {e.message}")
            print()

        outcome = await session.execute(decision, approved=True, simulate=True)
        print("Approved (simulation):")
        print(outcome.message)
        print()

        print("Decision Log")
        print("-" * 50)
        for entry in reversed(runtime.log.list()):
            print(f"#{entry.id} {entry.action:<20} {entry.type.value:<12} {entry.status.value}")


if __name__ == "__main__":
    asyncio.run(main())
