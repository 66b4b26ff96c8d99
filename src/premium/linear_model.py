from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from sklearn.linear_model import LinearRegression
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

try:
    import torch
    from torch import nn
    from torch.utils.data import DataLoader, TensorDataset
except ModuleNotFoundError:  # pragma: no cover - optional dependency path
    torch = None
    nn = None
    DataLoader = None
    TensorDataset = None

logger = logging.getLogger(__name__)

SOLVERS = ("ols", "adam")


@dataclass(frozen=True)
class ModelParameters:
    weights: tuple[float, ...]
    bias: float


@dataclass(frozen=True)
class RegressionMetrics:
    mae: float
    rmse: float
    r2: float

    def to_dict(self) -> dict[str, float]:
        return {"MAE": self.mae, "RMSE": self.rmse, "R2": self.r2}


def evaluate(y_true: np.ndarray, y_pred: np.ndarray) -> RegressionMetrics:
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    return RegressionMetrics(
        mae=float(mean_absolute_error(y_true, y_pred)),
        rmse=float(np.sqrt(mean_squared_error(y_true, y_pred))),
        r2=float(r2_score(y_true, y_pred)),
    )


class LinearPremiumModel:
    """
    One dense linear unit over the standardized features:
    premium = weights . x_scaled + bias.

    ``solver="ols"`` solves least squares in closed form. ``solver="adam"``
    fits the same unit by mini-batch gradient descent from a zero start and
    needs the optional torch extra.
    """

    def __init__(
        self,
        solver: str = "ols",
        epochs: int = 100,
        learning_rate: float = 0.01,
        batch_size: int = 32,
        random_state: int = 42,
    ) -> None:
        if solver not in SOLVERS:
            raise ValueError(f"Unsupported solver: {solver}")
        self.solver = solver
        self.epochs = epochs
        self.learning_rate = learning_rate
        self.batch_size = batch_size
        self.random_state = random_state
        self._params: ModelParameters | None = None

    @classmethod
    def from_params(cls, params: ModelParameters) -> "LinearPremiumModel":
        model = cls()
        model._params = params
        return model

    @property
    def params(self) -> ModelParameters:
        if self._params is None:
            raise RuntimeError("LinearPremiumModel is not fitted")
        return self._params

    def fit(self, X: np.ndarray, y: np.ndarray) -> "LinearPremiumModel":
        X = np.asarray(X, dtype=float)
        y = np.asarray(y, dtype=float)
        if X.ndim != 2 or len(X) != len(y) or len(X) == 0:
            raise ValueError(f"Expected X of shape (n, k) matching y, got {X.shape} and {y.shape}")
        if self.solver == "ols":
            weights, bias = self._fit_ols(X, y)
        else:
            weights, bias = self._fit_adam(X, y)
        self._params = ModelParameters(weights=tuple(float(w) for w in weights), bias=float(bias))
        return self

    def _fit_ols(self, X: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, float]:
        reg = LinearRegression().fit(X, y)
        return reg.coef_, float(reg.intercept_)

    def _fit_adam(self, X: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, float]:
        if torch is None:
            raise RuntimeError("torch is not installed; install the 'torch' extra or use solver='ols'")

        torch.manual_seed(self.random_state)
        x_tensor = torch.tensor(X, dtype=torch.float32)
        y_tensor = torch.tensor(y, dtype=torch.float32).unsqueeze(-1)
        loader = DataLoader(TensorDataset(x_tensor, y_tensor), batch_size=self.batch_size, shuffle=True)

        layer = nn.Linear(X.shape[1], 1)
        nn.init.zeros_(layer.weight)
        nn.init.zeros_(layer.bias)
        optimizer = torch.optim.Adam(layer.parameters(), lr=self.learning_rate)
        loss_fn = nn.MSELoss()

        layer.train()
        for epoch in range(self.epochs):
            batch_losses = []
            for xb, yb in loader:
                optimizer.zero_grad()
                loss = loss_fn(layer(xb), yb)
                loss.backward()
                optimizer.step()
                batch_losses.append(float(loss.item()))
            if (epoch + 1) % 20 == 0:
                logger.info("Epoch %d: loss = %.4f", epoch + 1, float(np.mean(batch_losses)))

        with torch.no_grad():
            weights = layer.weight.detach().numpy().reshape(-1).astype(float)
            bias = float(layer.bias.detach().numpy()[0])
        return weights, bias

    def predict(self, X: np.ndarray) -> np.ndarray:
        params = self.params
        X = np.atleast_2d(np.asarray(X, dtype=float))
        return X @ np.asarray(params.weights) + params.bias

    def predict_one(self, x: np.ndarray) -> float:
        return float(self.predict(x)[0])
