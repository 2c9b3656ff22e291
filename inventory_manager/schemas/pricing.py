from pydantic import BaseModel


class PriceCalculation(BaseModel):
    base_price: float
    gst_amount: float
    final_price: float
    gst_percentage: float
