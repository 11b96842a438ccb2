"""Services layer - Business logic.

Services are classes of static async methods that take an AsyncSession,
implement one content domain each, and raise HTTPException for client errors.
"""
