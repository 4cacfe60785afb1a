from __future__ import annotations

import json
import math
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import torch

from .config import FlagNetConfig

VectorLike = Union[Sequence[float], np.ndarray, torch.Tensor]

DTYPE = torch.float64

SIZE_KEYS: Tuple[str, ...] = ("inputSize", "hiddenSize", "outputSize")
PAYLOAD_KEYS: Tuple[str, ...] = SIZE_KEYS + (
    "weightsInputHidden",
    "biasHidden",
    "weightsHiddenOutput",
    "biasOutput",
    "learningRate",
)


class DimensionMismatch(ValueError):
    """A vector's length disagrees with the network topology."""


class PersistenceError(RuntimeError):
    """A saved network is missing, unreadable, or inconsistent."""


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


class NeuralNetwork:
    """
    A single-hidden-layer sigmoid network trained one example at a time.

    I keep the parameters as plain float64 tensors (no nn.Module) because the topology is
    fixed and there is nothing to compose:

        hidden = sigmoid(bias_hidden + input @ weights_input_hidden)
        output = sigmoid(bias_output + hidden @ weights_hidden_output)

    Each `train()` call is one SGD step on 0.5 * sum((target - output)^2). Its gradient is
    the classic delta rule (output delta (t - o) * o * (1 - o), hidden delta from the
    pre-update output weights), so the update matches hand-written backprop exactly.
    """

    def __init__(
        self,
        input_size: int,
        hidden_size: int,
        output_size: int,
        *,
        learning_rate: float = 0.1,
        seed: Optional[int] = None,
        generator: Optional[torch.Generator] = None,
    ):
        for name, value in (("input_size", input_size), ("hidden_size", hidden_size), ("output_size", output_size)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or int(value) <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

        self._input_size = int(input_size)
        self._hidden_size = int(hidden_size)
        self._output_size = int(output_size)
        self._learning_rate = float(learning_rate)

        if generator is None:
            generator = torch.Generator()
            if seed is not None:
                generator.manual_seed(int(seed))
            else:
                generator.seed()
        self.generator = generator

        # Xavier-style ranges, one per layer; biases start at exactly zero.
        limit_ih = math.sqrt(6.0 / (self._input_size + self._hidden_size))
        limit_ho = math.sqrt(6.0 / (self._hidden_size + self._output_size))
        self.weights_input_hidden = self._uniform((self._input_size, self._hidden_size), limit_ih)
        self.bias_hidden = torch.zeros(self._hidden_size, dtype=DTYPE, requires_grad=True)
        self.weights_hidden_output = self._uniform((self._hidden_size, self._output_size), limit_ho)
        self.bias_output = torch.zeros(self._output_size, dtype=DTYPE, requires_grad=True)

        self._optimizer = torch.optim.SGD(self.parameters(), lr=self._learning_rate)

    @classmethod
    def from_config(cls, cfg: FlagNetConfig, *, seed: Optional[int] = None) -> "NeuralNetwork":
        return cls(cfg.input_size, cfg.hidden_size, cfg.output_size, learning_rate=cfg.learning_rate, seed=seed)

    def _uniform(self, shape: Tuple[int, int], limit: float) -> torch.Tensor:
        w = torch.empty(shape, dtype=DTYPE)
        w.uniform_(-limit, limit, generator=self.generator)
        return w.requires_grad_()

    @property
    def input_size(self) -> int:
        return self._input_size

    @property
    def hidden_size(self) -> int:
        return self._hidden_size

    @property
    def output_size(self) -> int:
        return self._output_size

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    def parameters(self) -> List[torch.Tensor]:
        return [self.weights_input_hidden, self.bias_hidden, self.weights_hidden_output, self.bias_output]

    def describe(self) -> str:
        return (
            "Neural Network created:\n"
            f"  Input layer: {self._input_size} nodes\n"
            f"  Hidden layer: {self._hidden_size} nodes\n"
            f"  Output layer: {self._output_size} nodes"
        )

    def __repr__(self) -> str:
        return (
            f"NeuralNetwork({self._input_size}, {self._hidden_size}, {self._output_size}, "
            f"learning_rate={self._learning_rate})"
        )

    @staticmethod
    def _as_vector(values: VectorLike, size: int, name: str) -> torch.Tensor:
        if isinstance(values, torch.Tensor):
            values = values.detach().cpu().numpy()
        arr = np.asarray(values, dtype=np.float64)
        if arr.ndim != 1 or arr.shape[0] != size:
            raise DimensionMismatch(f"{name} must be a vector of length {size}, got shape {arr.shape}")
        return torch.from_numpy(arr)

    def _forward(self, x: torch.Tensor) -> torch.Tensor:
        hidden = torch.sigmoid(self.bias_hidden + x @ self.weights_input_hidden)
        return torch.sigmoid(self.bias_output + hidden @ self.weights_hidden_output)

    def guess(self, input: VectorLike) -> np.ndarray:
        """
        Forward pass only.

        Returns a float64 array of length `output_size`, each entry in (0, 1). Raises
        DimensionMismatch if `input` isn't a vector of length `input_size`.
        """
        x = self._as_vector(input, self._input_size, "input")
        with torch.no_grad():
            output = self._forward(x)
        return output.numpy()

    def train(self, input: VectorLike, target: VectorLike) -> None:
        """One in-place SGD step on a single (input, target) example."""
        x = self._as_vector(input, self._input_size, "input")
        t = self._as_vector(target, self._output_size, "target")

        self._optimizer.zero_grad(set_to_none=True)
        output = self._forward(x)
        loss = 0.5 * torch.sum((t - output) ** 2)
        loss.backward()
        self._optimizer.step()

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready snapshot of topology, parameters and learning rate."""
        return {
            "inputSize": self._input_size,
            "hiddenSize": self._hidden_size,
            "outputSize": self._output_size,
            "weightsInputHidden": self.weights_input_hidden.detach().tolist(),
            "biasHidden": self.bias_hidden.detach().tolist(),
            "weightsHiddenOutput": self.weights_hidden_output.detach().tolist(),
            "biasOutput": self.bias_output.detach().tolist(),
            "learningRate": self._learning_rate,
        }

    @classmethod
    def from_payload(cls, payload: Any, *, source: str = "payload") -> "NeuralNetwork":
        if not isinstance(payload, dict):
            raise PersistenceError(f"{source}: expected a JSON object, got {type(payload).__name__}")
        missing = [k for k in PAYLOAD_KEYS if k not in payload]
        if missing:
            raise PersistenceError(f"{source}: missing fields {', '.join(missing)}")

        sizes = []
        for key in SIZE_KEYS:
            v = payload[key]
            if isinstance(v, bool) or not isinstance(v, int) or v <= 0:
                raise PersistenceError(f"{source}: {key} must be a positive integer, got {v!r}")
            sizes.append(v)
        n_in, n_hidden, n_out = sizes

        lr = payload["learningRate"]
        if not _is_number(lr) or not math.isfinite(lr) or lr <= 0:
            raise PersistenceError(f"{source}: learningRate must be a positive finite number, got {lr!r}")

        w_ih = _tensor_field(payload, "weightsInputHidden", (n_in, n_hidden), source)
        b_h = _tensor_field(payload, "biasHidden", (n_hidden,), source)
        w_ho = _tensor_field(payload, "weightsHiddenOutput", (n_hidden, n_out), source)
        b_o = _tensor_field(payload, "biasOutput", (n_out,), source)

        net = cls(n_in, n_hidden, n_out, learning_rate=float(lr), seed=0)
        with torch.no_grad():
            net.weights_input_hidden.copy_(w_ih)
            net.bias_hidden.copy_(b_h)
            net.weights_hidden_output.copy_(w_ho)
            net.bias_output.copy_(b_o)
        return net

    def save(self, path: Union[str, Path]) -> Path:
        """
        Write the network as pretty-printed JSON.

        I write to a sibling temp file and `os.replace` it into place, so a failed write
        never leaves a truncated model behind. OSError propagates to the caller.
        """
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = out_path.with_name(out_path.name + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(self.to_payload(), f, indent=2)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, out_path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
        return out_path

    @classmethod
    def load(cls, path: Union[str, Path]) -> "NeuralNetwork":
        p = Path(path)
        try:
            with p.open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except FileNotFoundError as e:
            raise PersistenceError(f"Model file not found: {p}") from e
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Model file {p} is not valid JSON: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read model file {p}: {e}") from e
        return cls.from_payload(payload, source=str(p))


def _tensor_field(payload: Dict[str, Any], key: str, shape: Tuple[int, ...], source: str) -> torch.Tensor:
    """Parse a nested list into a float64 tensor of exactly `shape`."""
    value = payload[key]
    if not isinstance(value, list):
        raise PersistenceError(f"{source}: {key} must be a list, got {type(value).__name__}")
    try:
        arr = np.array(value, dtype=object)
    except ValueError as e:
        raise PersistenceError(f"{source}: {key} is not a rectangular array ({e})") from e
    if arr.shape != shape:
        raise PersistenceError(f"{source}: {key} has shape {arr.shape}, expected {shape}")
    if not all(_is_number(v) for v in arr.flat):
        raise PersistenceError(f"{source}: {key} contains non-numeric entries")
    values = arr.astype(np.float64)
    if not np.isfinite(values).all():
        raise PersistenceError(f"{source}: {key} contains non-finite entries")
    return torch.from_numpy(values)
