"""Tests for the light models."""

from monoray.vec3 import Vector, Point
from monoray.ray import Ray
from monoray.shapes import Intersection
from monoray.scene_parser import parse_scene
from monoray.lights import (
    Ambient, Diffuse, SpecularHighlight, Shadowed, Reflexion,
    ShadowPromise, REFLEXION_WEIGHT_STOP
)


def unshadowed():
    return ShadowPromise(lambda: False)


class FakeRaytracer:
    """Records traced rays and answers with a fixed brightness."""

    def __init__(self, brightness=0.5):
        self.brightness = brightness
        self.rays = []

    def trace_ray(self, ray):
        self.rays.append(ray)
        return self.brightness


class TestShadowPromise:
    """The shadow ray is cast at most once."""

    def test_computed_once(self):
        calls = []

        def supplier():
            calls.append(1)
            return True

        promise = ShadowPromise(supplier)
        assert calls == []
        assert promise.get() is True
        assert promise.get() is True
        assert len(calls) == 1


class TestAmbient:
    """Test the ambient model."""

    def test_ratio(self):
        scene = parse_scene(["looker [0 0 5] [0 0 0] 2 2", "sphere [0 0 0] 1", "ambient 0.3"])
        hit = scene.find_intersection(Ray(Point(0, 0, 5), Vector(0, 0, -1)))
        assert Ambient().calculate(scene, hit) == 0.3

    def test_no_intersection(self):
        scene = parse_scene(["looker [0 0 5] [0 0 0] 2 2"])
        assert Ambient().calculate(scene, None) == 0.0


class TestShadowed:
    """Test shadow detection."""

    def test_blocked_light(self):
        scene = parse_scene([
            "looker [0 0 5] [0 0 0] 2 2",
            "light [0 0 -20]",
            "sphere [0 0 -5] 1",
        ])
        hit = scene.find_intersection(Ray(Point(0, 0, 0), Vector(0, 0, -1)))
        assert hit.point == Point(0, 0, -4)

        assert Shadowed.is_shadowed(scene, hit)
        assert Shadowed().calculate(scene, hit) == 1.0

    def test_light_in_front(self):
        scene = parse_scene([
            "looker [0 0 5] [0 0 0] 2 2",
            "light [0 0 10]",
            "sphere [0 0 -5] 1",
        ])
        hit = scene.find_intersection(Ray(Point(0, 0, 0), Vector(0, 0, -1)))
        assert not Shadowed.is_shadowed(scene, hit)
        assert Shadowed().calculate(scene, hit) == 0.0

    def test_blocker_beyond_light(self):
        scene = parse_scene([
            "looker [0 0 5] [0 0 0] 2 2",
            "light [0 0 3]",
            "sphere [0 0 10] 1",
        ])
        # A point on the floor between the camera and the light.
        hit = Intersection(Point(0, 0, 0), scene.primitives[0], 1.0, True)
        assert not Shadowed.is_shadowed(scene, hit)

    def test_no_light(self):
        scene = parse_scene(["looker [0 0 5] [0 0 0] 2 2", "sphere [0 0 -5] 1"])
        hit = scene.find_intersection(Ray(Point(0, 0, 0), Vector(0, 0, -1)))
        assert not Shadowed.is_shadowed(scene, hit)


class TestDiffuse:
    """Test Lambertian shading."""

    def test_facing_light(self):
        scene = parse_scene([
            "looker [0 0 5] [0 0 0] 2 2",
            "light [0 0 0]",
            "sphere [0 0 -5] 1",
        ])
        hit = scene.find_intersection(Ray(Point(0, 0, 0), Vector(0, 0, -1)))
        assert abs(Diffuse(unshadowed()).calculate(scene, hit) - 0.95) < 1e-12

    def test_oblique_light(self):
        scene = parse_scene([
            "looker [0 5 5] [0 0 0] 2 2",
            "light [0 5 5]",
            "plane [0 0 0] <0 1 0>",
            "diffuse 1",
        ])
        hit = scene.find_intersection(Ray(Point(0, 5, 0), Vector(0, -1, 0)))
        assert abs(Diffuse(unshadowed()).calculate(scene, hit) - 0.5 ** 0.5) < 1e-12

    def test_light_behind_surface(self):
        scene = parse_scene([
            "looker [0 5 5] [0 0 0] 2 2",
            "light [0 -5 0]",
            "plane [0 0 0] <0 1 0>",
        ])
        hit = scene.find_intersection(Ray(Point(0, 5, 0), Vector(0, -1, 0)))
        assert Diffuse(unshadowed()).calculate(scene, hit) == 0.0

    def test_shadowed(self):
        scene = parse_scene([
            "looker [0 0 5] [0 0 0] 2 2",
            "light [0 0 0]",
            "sphere [0 0 -5] 1",
        ])
        hit = scene.find_intersection(Ray(Point(0, 0, 0), Vector(0, 0, -1)))
        assert Diffuse(ShadowPromise(lambda: True)).calculate(scene, hit) == 0.0

    def test_no_light(self):
        scene = parse_scene(["looker [0 0 5] [0 0 0] 2 2", "sphere [0 0 -5] 1"])
        hit = scene.find_intersection(Ray(Point(0, 0, 0), Vector(0, 0, -1)))
        assert Diffuse(unshadowed()).calculate(scene, hit) == 0.0


class TestSpecularHighlight:
    """Test Phong highlights."""

    def scene(self, exponent):
        return parse_scene([
            "looker [0 0 5] [0 0 0] 2 2",
            "light [0 0 0]",
            "sphere [0 0 -5] 1",
            f"specular 0.5 {exponent}",
        ])

    def test_mirror_direction(self):
        scene = self.scene(1)
        ray = Ray(Point(0, 0, 0), Vector(0, 0, -1))
        hit = scene.find_intersection(ray)
        assert abs(SpecularHighlight(unshadowed(), ray).calculate(scene, hit) - 0.5) < 1e-12

    def test_exponent(self):
        scene = self.scene(2)
        ray = Ray(Point(0, 0, 0), Vector(0.1, 0, -1))
        hit = scene.find_intersection(ray)

        value = SpecularHighlight(unshadowed(), ray).calculate(scene, hit)
        assert 0 < value < 0.5

    def test_zero_ratio(self):
        scene = parse_scene([
            "looker [0 0 5] [0 0 0] 2 2",
            "light [0 0 0]",
            "sphere [0 0 -5] 1",
        ])
        ray = Ray(Point(0, 0, 0), Vector(0, 0, -1))
        hit = scene.find_intersection(ray)
        assert SpecularHighlight(unshadowed(), ray).calculate(scene, hit) == 0.0

    def test_highlight_facing_away(self):
        scene = parse_scene([
            "looker [0 5 5] [0 0 0] 2 2",
            "light [0 1 -5]",
            "plane [0 0 0] <0 1 0>",
            "specular 1 1",
        ])
        # Reflected up and toward +z while the light is mostly toward -z.
        ray = Ray(Point(0, 5, -5), Vector(0, -1, 1))
        hit = scene.find_intersection(ray)
        assert SpecularHighlight(unshadowed(), ray).calculate(scene, hit) == 0.0

    def test_shadowed(self):
        scene = self.scene(1)
        ray = Ray(Point(0, 0, 0), Vector(0, 0, -1))
        hit = scene.find_intersection(ray)
        assert SpecularHighlight(ShadowPromise(lambda: True), ray).calculate(scene, hit) == 0.0


class TestReflexion:
    """Test recursive reflections."""

    def mirror_scene(self, ratio):
        return parse_scene([
            "looker [0 5 5] [0 0 0] 2 2",
            "plane [0 0 0] <0 1 0>",
            f"reflexion {ratio}",
        ])

    def test_traces_mirrored_ray(self):
        scene = self.mirror_scene(0.5)
        ray = Ray(Point(0, 1, -1), Vector(0, -1, 1))
        hit = scene.find_intersection(ray)
        tracer = FakeRaytracer(0.8)

        assert Reflexion(ray, tracer).calculate(scene, hit) == 0.8

        (mirrored,) = tracer.rays
        assert mirrored.origin == Point(0, 0, 0)
        assert mirrored.direction == Vector(0, 1, 1).normalize()
        assert mirrored.weight == 0.5

    def test_weight_multiplies(self):
        scene = self.mirror_scene(0.5)
        ray = Ray(Point(0, 1, 0), Vector(0, -1, 0), 0.25)
        hit = scene.find_intersection(ray)
        tracer = FakeRaytracer()

        Reflexion(ray, tracer).calculate(scene, hit)
        assert tracer.rays[0].weight == 0.125

    def test_stops_below_threshold(self):
        scene = self.mirror_scene(0.5)
        ray = Ray(Point(0, 1, 0), Vector(0, -1, 0), 0.005)
        hit = scene.find_intersection(ray)
        tracer = FakeRaytracer()

        assert 0.005 * 0.5 < REFLEXION_WEIGHT_STOP
        assert Reflexion(ray, tracer).calculate(scene, hit) == 0.0
        assert tracer.rays == []

    def test_threshold_is_inclusive(self):
        scene = self.mirror_scene(0.5)
        ray = Ray(Point(0, 1, 0), Vector(0, -1, 0), 2 * REFLEXION_WEIGHT_STOP)
        hit = scene.find_intersection(ray)
        tracer = FakeRaytracer()

        Reflexion(ray, tracer).calculate(scene, hit)
        assert len(tracer.rays) == 1

    def test_not_reflective(self):
        scene = parse_scene(["looker [0 5 5] [0 0 0] 2 2", "plane [0 0 0] <0 1 0>"])
        ray = Ray(Point(0, 1, 0), Vector(0, -1, 0))
        hit = scene.find_intersection(ray)
        tracer = FakeRaytracer()

        assert Reflexion(ray, tracer).calculate(scene, hit) == 0.0
        assert tracer.rays == []

    def test_no_intersection(self):
        scene = self.mirror_scene(1)
        assert Reflexion(Ray(Point(0, 1, 0), Vector(0, 1, 0)), FakeRaytracer()).calculate(scene, None) == 0.0
