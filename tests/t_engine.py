import asyncio

from cardpoints import CalculationInput
from cardpoints import CardPresetRegistry
from cardpoints import RewardCalculator
from cardpoints import RewardRule


def t_dbs_online_purchase() -> None:
    registry = CardPresetRegistry()
    rules = [
        RewardRule.model_validate(draft.model_dump())
        for draft in registry.starter_rules("dbs-womans-world-mastercard", "debug-card")
    ]
    txn = CalculationInput(amount=103, product_id="debug-card", is_online=True, used_bonus_points=2600)

    result = asyncio.run(RewardCalculator().calculate(txn, rules))

    print(result.base_points, result.bonus_points, result.total_points)
    print(result.messages)
    # assert result.base_points == 20
    # assert result.bonus_points == 100

# debug 用这里, pytest 不收 t_ 开头的文件
if __name__ == "__main__":
    t_dbs_online_purchase()
