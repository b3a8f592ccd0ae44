"""
Shape of the demand prediction service's answer. A response that does not
validate in full is rejected; partial predictions are never shown.
"""
from rest_framework import serializers


class HighDemandItemSerializer(serializers.Serializer):
    name = serializers.CharField()
    reason = serializers.CharField()
    confidenceScore = serializers.FloatField(min_value=0, max_value=100)


class LowDemandItemSerializer(serializers.Serializer):
    name = serializers.CharField()
    reason = serializers.CharField()
    recommendation = serializers.CharField()


class PeakTimeSerializer(serializers.Serializer):
    time = serializers.CharField()
    expectedOrders = serializers.CharField()


class PredictionsSerializer(serializers.Serializer):
    highDemandItems = HighDemandItemSerializer(many=True)
    lowDemandItems = LowDemandItemSerializer(many=True)
    peakTimes = PeakTimeSerializer(many=True)
    wastageReduction = serializers.ListField(child=serializers.CharField())
    summary = serializers.CharField()


class PredictionResponseSerializer(serializers.Serializer):
    predictions = PredictionsSerializer()


class TopItemSerializer(serializers.Serializer):
    name = serializers.CharField()
    count = serializers.IntegerField()
    revenue = serializers.IntegerField()


class OrderStatsSerializer(serializers.Serializer):
    totalOrders = serializers.IntegerField()
    topItems = TopItemSerializer(many=True)
    peakHours = serializers.ListField(child=serializers.CharField())
    busiestDays = serializers.ListField(child=serializers.CharField())
