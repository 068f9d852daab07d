from pydantic import BaseModel


class TxReceiptInfo(BaseModel):
    tx_hash: str
    block_number: int
    # 1 for success, 0 for reverted
    status: int = 1
